"""Streamlit entry point: ``streamlit run main.py``."""
from portal_app.app import main

main()
