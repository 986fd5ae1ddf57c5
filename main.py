from app.api.booking.appointments import appointments_bp
from app.api.barbers.barbers import barbers_bp
from app.api.clients.clients import clients_bp
from app.api.catalog.services import services_bp
from app.api.reviews.reviews import reviews_bp
from app.api.financials.reports import financial_reports_bp
from app.api.financials.payouts import payouts_bp
from app.api.dashboard.dashboard import dashboard_bp
from app.routes.auth import auth_bp
from app.routes.site_images import site_images_bp
from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
from flasgger import Swagger
from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE
import os

load_dotenv()
from app.config import Config  # noqa: E402
from app.extensions import db  # noqa: E402


def create_app(config_overrides=None):
    print("Starting create_app()")
    app = Flask(__name__)
    try:
        print("Loading config...")
        app.config.from_object(Config)
        if config_overrides:
            app.config.update(config_overrides)
        app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
        print(f"Config loaded: {len(app.config)} items")

        CORS(app)
        print("CORS initialized")

        db.init_app(app)
        print("Database initialized")

        host = os.environ.get("API_HOST", "127.0.0.1:5000")
        swagger_template = SWAGGER_TEMPLATE.copy()
        swagger_template["host"] = host

        Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)
        print("Swagger initialized - Access at /api/docs")
        print("Registering blueprints...")

        blueprints = [
            auth_bp,
            barbers_bp,
            clients_bp,
            services_bp,
            appointments_bp,
            reviews_bp,
            financial_reports_bp,
            payouts_bp,
            dashboard_bp,
            site_images_bp,
        ]

        for bp in blueprints:
            app.register_blueprint(bp)
            print(f"  ✓ {bp.name} registered")

        @app.route("/")
        def home():
            """
            Root endpoint - API status
            ---
            tags:
              - Utility
            responses:
              200:
                description: API is running
                schema:
                  type: object
                  properties:
                    status:
                      type: string
                    message:
                      type: string
                    docs_url:
                      type: string
            """
            return {
                "status": "ok",
                "message": "Barbershop backend is running!",
                "docs_url": "/api/docs",
            }, 200

        print(f"Total routes registered: {len(list(app.url_map.iter_rules()))}")

    except Exception as e:
        print(f"Error during app creation: {e}")
        import traceback

        print(f"Full traceback: {traceback.format_exc()}")
        raise

    print("create_app() completed successfully")
    return app


app = create_app()


if __name__ == "__main__":
    # Create a .env containing:
    #       DATABASE_URL=mysql+pymysql://<USER>:<PASSWORD>@<HOST>:<PORT>/barbershop
    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0", port=port, debug=os.environ.get("FLASK_ENV") != "production"
    )
