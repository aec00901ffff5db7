"""
API server module for the GeoCSC package.

This module provides a Flask-based API server exposing the country, state
and city lookups over HTTP. The geo index is built before the application
object is returned, so a server never accepts traffic without data.
"""

import time
from datetime import datetime, timezone
from functools import wraps
from typing import Dict, Any, Optional, Tuple, Callable

from flask import Flask, request, Response, g, current_app
import werkzeug.exceptions

from GeoCSC import __version__
from GeoCSC.config import get_config
from GeoCSC.exceptions import GeoDataError, SystemError
from GeoCSC.services.geo_service import GeoService, parse_state_id
from GeoCSC.utils import log_error
from GeoCSC.utils.logging import get_logger, get_request_id

logger = get_logger(__name__)

SERVICE_NAME = 'CSC (Country, State, City) API'

def format_response(data: Any = None, message: Optional[str] = None,
                    error: Optional[str] = None, status_code: int = 200,
                    meta: Optional[Dict[str, Any]] = None,
                    error_code: Optional[str] = None) -> Tuple[Dict[str, Any], int]:
    """
    Format API response in a standardized structure.

    Args:
        data: Response data payload
        message: Optional success message
        error: Optional error name
        status_code: HTTP status code
        meta: Optional metadata dictionary
        error_code: Optional error code identifier

    Returns:
        Tuple of (response_dict, status_code)
    """
    response = {
        'success': 200 <= status_code < 300,
        'status_code': status_code,
    }

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if error:
        response['error'] = error

    if error_code:
        response['error_code'] = error_code

    if meta:
        response['meta'] = meta

    return response, status_code

def api_response(f: Callable) -> Callable:
    """
    Decorator wrapping an endpoint's return value in the response envelope.

    Exceptions are left to the application's error handlers.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        return format_response(data=f(*args, **kwargs))

    return decorated_function

def create_app(service: Optional[GeoService] = None, data_path: Optional[str] = None,
               debug: bool = False) -> Flask:
    """
    Create and configure a Flask application instance.

    The dataset is loaded and indexed here unless a ready service is given.
    Load failures propagate: an application is never created without data.

    Args:
        service: A ready GeoService to serve from
        data_path: Dataset path used when no service is given
        debug: Enable debug mode with additional error information

    Returns:
        A configured Flask application

    Raises:
        DataUnavailableError: If the dataset cannot be obtained
        DataMalformedError: If the dataset is invalid
    """
    app = Flask(__name__)
    app.config.update(DEBUG=debug)

    if service is None:
        service = GeoService.from_source(data_path)
    app.config['GEO_SERVICE'] = service

    app.json.sort_keys = False
    app.json.ensure_ascii = False

    @app.before_request
    def before_request() -> None:
        """Set up request context with timing and tracing information."""
        g.start_time = time.time()
        g.request_id = request.headers.get('X-Request-ID') or get_request_id()

    @app.after_request
    def after_request(response: Response) -> Response:
        """Log request information and add tracing headers."""
        if hasattr(g, 'start_time'):
            duration_ms = (time.time() - g.start_time) * 1000
            response.headers['X-Request-Duration-Ms'] = str(int(duration_ms))
            response.headers['X-Request-ID'] = g.request_id

            logger.info(
                f"Request: {request.method} {request.path} | "
                f"Status: {response.status_code} | "
                f"Duration: {duration_ms:.2f}ms",
                extra={'request_id': g.request_id}
            )

        return response

    @app.errorhandler(GeoDataError)
    def handle_geodata_error(error: GeoDataError) -> Tuple[Dict[str, Any], int]:
        """Handle GeoCSC-specific exceptions."""
        if error.status_code >= 500:
            logger.error(f"GeoCSC Error: {error.error_code} - {error.message}")
        else:
            logger.info(f"{error.error_code} - {error.message}")

        error.context['debug'] = debug
        error_dict = error.to_dict()

        return format_response(
            error=error.__class__.__name__,
            message=error.user_message,
            status_code=error.status_code,
            error_code=error.error_code,
            meta=error_dict.get('technical_details') if debug else None
        )

    @app.errorhandler(werkzeug.exceptions.HTTPException)
    def handle_http_error(error: werkzeug.exceptions.HTTPException) -> Tuple[Dict[str, Any], int]:
        """Handle routing errors such as unknown paths or methods."""
        return format_response(
            error=error.name,
            message=str(error.description),
            status_code=error.code or 500
        )

    @app.errorhandler(Exception)
    def handle_exception(error: Exception) -> Tuple[Dict[str, Any], int]:
        """Handle unexpected exceptions as a generic server error."""
        log_error(error, "Unhandled server exception")

        system_error = GeoDataError(
            message=f"Unhandled exception: {error}",
            user_message="Internal server error",
            error_code="CSC-SYS-5000",
            status_code=500,
            cause=error
        )
        return handle_geodata_error(system_error)

    register_routes(app)

    return app

def get_geo_service() -> GeoService:
    """
    Get the GeoService of the current application.

    Raises:
        SystemError: If the application was created without a geo index
    """
    service = current_app.config.get('GEO_SERVICE')
    if service is None:
        raise SystemError("Geo index is not ready; the application has no GeoService")
    return service

def register_routes(app: Flask) -> None:
    """
    Register API routes with the Flask application.

    Args:
        app: Flask application instance
    """
    @app.route('/', methods=['GET'])
    @api_response
    def index() -> Dict[str, Any]:
        """Service information with the available endpoints."""
        return {
            'message': SERVICE_NAME,
            'version': __version__,
            'endpoints': {
                'GET /api/v1/countries': 'Get all countries',
                'GET /api/v1/states/<country_code>': 'Get states by country code (ISO2)',
                'GET /api/v1/cities/<country_code>/<state_id>': 'Get cities by country code and state id',
                'GET /health': 'Health check'
            },
            'examples': {
                'countries': '/api/v1/countries',
                'states': '/api/v1/states/US',
                'cities': '/api/v1/cities/US/1'
            }
        }

    @app.route('/health', methods=['GET'])
    @api_response
    def health() -> Dict[str, Any]:
        """
        Health check endpoint.

        The application only exists once the index is built, so a response
        here means the service is ready.
        """
        return {
            'status': 'ok',
            'service': SERVICE_NAME,
            'stats': get_geo_service().get_stats(),
            'timestamp': datetime.now(timezone.utc).isoformat()
        }

    @app.route('/api/v1/countries', methods=['GET'])
    @api_response
    def countries() -> Dict[str, Any]:
        """Get all countries with id, name, iso2, iso3 and phonecode."""
        countries_list = get_geo_service().get_countries()

        return {
            'count': len(countries_list),
            'countries': countries_list
        }

    @app.route('/api/v1/states/<country_code>', methods=['GET'])
    @api_response
    def states(country_code: str) -> Dict[str, Any]:
        """
        Get all states for a country.

        Parameters:
            country_code: ISO2 country code (e.g., US, IN, GB), any case
        """
        states_list = get_geo_service().get_states(country_code)

        return {
            'country_code': country_code,
            'count': len(states_list),
            'states': states_list
        }

    @app.route('/api/v1/cities/<country_code>/<state_id>', methods=['GET'])
    @api_response
    def cities(country_code: str, state_id: str) -> Dict[str, Any]:
        """
        Get all cities for a state within a country.

        Parameters:
            country_code: ISO2 country code, any case
            state_id: Numeric state id
        """
        cities_list = get_geo_service().get_cities(country_code, state_id)

        return {
            'country_code': country_code,
            'state_id': parse_state_id(state_id),
            'count': len(cities_list),
            'cities': cities_list
        }

def start_server(host: Optional[str] = None, port: Optional[int] = None,
                 data_path: Optional[str] = None, debug: Optional[bool] = None) -> None:
    """
    Load the dataset, build the index and start the development server.

    Unset arguments fall back to the api.* configuration, which honours
    the HOST and PORT environment variables.

    Raises:
        DataUnavailableError: If the dataset cannot be obtained
        DataMalformedError: If the dataset is invalid
    """
    settings = get_config().get_api_settings()
    host = host or settings['host']
    port = port or settings['port']
    debug = settings['debug'] if debug is None else debug

    app = create_app(data_path=data_path, debug=debug)

    logger.info(f"Starting GeoCSC API server on {host}:{port} (debug: {debug})")
    app.run(host=host, port=port, debug=debug)
