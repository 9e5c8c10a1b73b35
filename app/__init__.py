"""Streamlit dashboard for the ROI engine."""
