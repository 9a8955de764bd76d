# backend/wsgi.py
from eventpos import create_app

app = create_app()
