"""Gradio user interface for Heavytime Stories."""
