from typing import Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from academy_dashboard.context import AppContext, require_session


def add_crud_routes(
    router: APIRouter,
    repo_name: str,
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    *,
    include_delete: bool = True,
) -> APIRouter:
    """Register get-one, create, update and delete for ``ctx.<repo_name>``.

    Call after any static sub-paths so they are matched before ``/{record_id}``.
    """

    @router.get('/{record_id}')
    def get_one(record_id: str, ctx: AppContext = Depends(require_session)):
        return getattr(ctx, repo_name).get_one(record_id)

    @router.post('', status_code=201)
    def create(payload: create_model, ctx: AppContext = Depends(require_session)):
        return getattr(ctx, repo_name).create(payload.to_payload())

    @router.patch('/{record_id}')
    def update(record_id: str, payload: update_model, ctx: AppContext = Depends(require_session)):
        return getattr(ctx, repo_name).update(record_id, payload.to_payload(partial=True))

    if include_delete:

        @router.delete('/{record_id}')
        def delete(record_id: str, ctx: AppContext = Depends(require_session)):
            return getattr(ctx, repo_name).delete(record_id)

    return router
