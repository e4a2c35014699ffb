"""
Application Core Components
"""
