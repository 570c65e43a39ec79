"""Registration API - registration management service"""
