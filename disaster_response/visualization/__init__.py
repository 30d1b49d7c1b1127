"""
India Disaster Response - Visualization Module
"""

from disaster_response.visualization.map_generator import create_report_map

__all__ = ["create_report_map"]
