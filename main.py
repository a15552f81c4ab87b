"""Application entry point"""
import os
from dotenv import load_dotenv

# Load .env before the config module reads the environment
load_dotenv(encoding='utf-8')

from estate_agent import create_app  # noqa: E402

app = create_app(os.environ.get('FLASK_ENV'))


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 10000))
    debug = os.environ.get('FLASK_ENV') == 'development'
    app.run(host='0.0.0.0', port=port, debug=debug)
