"""
India Disaster Response - REST API
"""
