"""
AICodeExplainer: AI-powered code explainer and converter.
Forwards pasted source code to Gemini and renders the returned text.
"""

__version__ = "1.0.0"
