# run.py
import atexit

from waitress import serve

from app import cleanup, create_app
from system.log_utils import info

app = create_app()
atexit.register(cleanup)

info("Serving via Waitress on http://0.0.0.0:5001")
serve(app, host='0.0.0.0', port=5001, threads=4)
