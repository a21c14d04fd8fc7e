"""
JWT authentication for the reservation API

Tokens are issued by the auth service. The `id` claim is the acting user
whose role on a reservation (borrower, owner or none) decides what they may do;
the `roles` claim only gates the admin tool policy endpoint.
"""

import jwt
from functools import wraps
from flask import request, g, current_app
import logging

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Authentication or authorization failure, reported before any reservation logic runs"""
    def __init__(self, message, status_code=401):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        if self.status_code == 403:
            return {'error': 'Forbidden', 'code': 'FORBIDDEN', 'message': self.message}
        return {'error': 'Unauthorized', 'code': 'UNAUTHORIZED', 'message': self.message}


def _jwt_secret():
    secret = current_app.config.get('JWT_SECRET')
    if secret:
        return secret

    from src.clients.dapr_secret_manager import get_secret_manager
    try:
        return get_secret_manager().get_secret('JWT_SECRET')
    except Exception as e:
        logger.error(f'Failed to load JWT secret from Dapr: {str(e)}')
        raise RuntimeError('JWT configuration not available') from e


def get_token_from_request():
    """Bearer token of the current request, or None when no Authorization header is sent"""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header:
        return None

    scheme, _, token = auth_header.partition(' ')
    if scheme != 'Bearer' or not token or ' ' in token:
        raise AuthError('Authorization header must be "Bearer <token>"')
    return token


def decode_jwt(token):
    cfg = current_app.config
    try:
        return jwt.decode(
            token,
            _jwt_secret(),
            algorithms=[cfg.get('JWT_ALGORITHM', 'HS256')],
            issuer=cfg.get('JWT_ISSUER', 'auth-service'),
            audience=cfg.get('JWT_AUDIENCE', 'toolshare-platform')
        )
    except jwt.ExpiredSignatureError:
        raise AuthError('Token has expired')
    except jwt.InvalidTokenError as e:
        logger.warning(f'Invalid token: {str(e)}')
        raise AuthError('Invalid token')


def authenticate():
    """
    Resolve the acting user from the request token into g.current_user.

    Raises:
        AuthError: missing, malformed or rejected token
    """
    token = get_token_from_request()
    if not token:
        raise AuthError('No authentication token provided')

    payload = decode_jwt(token)
    user_id = payload.get('id') or payload.get('user_id') or payload.get('sub')
    if not user_id:
        raise AuthError('Token missing user identifier')

    g.current_user = {
        'id': str(user_id),
        'email': payload.get('email'),
        'roles': payload.get('roles', [])
    }
    return g.current_user


def require_auth(f):
    """Reject the request unless it carries a valid token"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            authenticate()
        except AuthError as e:
            logger.warning(f'Authentication failed on {request.path}: {e.message}')
            return e.to_dict(), e.status_code
        except RuntimeError as e:
            logger.error(f'Authentication error: {str(e)}')
            return {
                'error': 'Internal Server Error',
                'code': 'AUTH_UNAVAILABLE',
                'message': 'Internal authentication error'
            }, 500

        # Reservation errors raised by the view reach the registered error handlers
        return f(*args, **kwargs)

    return decorated_function


def require_roles(*required_roles):
    """Usage: @require_roles('admin')"""
    def decorator(f):
        @wraps(f)
        @require_auth
        def decorated_function(*args, **kwargs):
            user_roles = g.current_user.get('roles', [])
            if not any(role in user_roles for role in required_roles):
                logger.warning(
                    f'User {g.current_user["id"]} lacks roles {required_roles} for {request.path}'
                )
                error = AuthError(f'Required roles: {", ".join(required_roles)}', 403)
                return error.to_dict(), error.status_code

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_admin(f):
    return require_roles('admin')(f)


def get_current_user():
    return getattr(g, 'current_user', None)


def current_user_id():
    """Id of the authenticated acting user, or None"""
    user = get_current_user()
    return user['id'] if user else None
