"""
PTM Report Card Portal
Flask application serving report cards from the results workbook
"""

from flask import Flask
from flask_wtf.csrf import CSRFProtect, generate_csrf
from config import Config
from datastore import results_store
from utils.numbers import format_mark, format_percentage


def create_app():
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(Config)

    CSRFProtect(app)

    @app.context_processor
    def inject_csrf_token():
        return dict(csrf_token=generate_csrf)

    from routes.portal import portal_bp
    app.register_blueprint(portal_bp)

    # Marks render as 34 / 34.5, percentages as 75.00%; 'NA' and '-' pass through
    app.add_template_filter(format_mark, 'format_mark')
    app.add_template_filter(format_percentage, 'format_percentage')

    results_store.init_app(app)

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=8000, debug=True, use_reloader=False)
