"""
India Disaster Response - Vercel Serverless Entry Point
"""

import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from disaster_response.api.main import app

# Vercel serverless handler
handler = app
