from fastapi import APIRouter, Depends

from academy_dashboard.context import AppContext, get_context, require_session
from academy_dashboard.route_logging import EndpointNameRoute
from academy_dashboard.schemas import LoginRequest, RegisterRequest


router = APIRouter(prefix='/api/auth', tags=['Auth'], route_class=EndpointNameRoute)


def _session_payload(ctx: AppContext) -> dict:
    return {'data': {'state': ctx.session.state.value, 'user': ctx.session.user}}


@router.post('/login')
def login(payload: LoginRequest, ctx: AppContext = Depends(get_context)):
    user = ctx.session.login(payload.email, payload.password)
    return {'data': {'user': user, 'token': ctx.session.token}}


@router.post('/register', status_code=201)
def register(payload: RegisterRequest, ctx: AppContext = Depends(get_context)):
    user = ctx.session.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    return {'data': {'user': user, 'token': ctx.session.token}}


@router.post('/logout')
def logout(ctx: AppContext = Depends(get_context)):
    ctx.session.logout()
    return {'data': {'success': True}}


@router.get('/session')
def session_state(ctx: AppContext = Depends(get_context)):
    return _session_payload(ctx)


@router.get('/me')
def me(ctx: AppContext = Depends(require_session)):
    return ctx.auth.me((ctx.session.user or {}).get('id'))
