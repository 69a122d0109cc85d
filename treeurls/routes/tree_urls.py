from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from pydantic import BaseModel

from ..errors import NotFoundError, StorageError, ValidationError
from ..logs import LogContext
from ..responses import bad_request, errored, not_found
from ..services import tree_urls_svc
from ..storage import TreeURLStore

router = APIRouter()


class TreeURLsOut(BaseModel):
    tree_urls: str


def get_store(request: Request) -> TreeURLStore:
    return request.app.state.store


async def raw_body(request: Request) -> bytes:
    return await request.body()


@router.get("/{sha1}")
def api_tree_urls_get(sha1: str, store: TreeURLStore = Depends(get_store)):
    try:
        records = tree_urls_svc.get_tree_urls(store, sha1)
    except ValidationError as ve:
        return bad_request(str(ve))
    except NotFoundError as nf:
        return not_found(str(nf))
    except StorageError as se:
        return errored(str(se))
    # payloads are already serialized JSON; only the first row is served
    body = records[0] if records else "[]"
    return Response(content=body, media_type="application/json")


@router.api_route("/{sha1}", methods=["PUT", "POST"], response_model=TreeURLsOut)
def api_tree_urls_put(
    sha1: str,
    body: bytes = Depends(raw_body),
    store: TreeURLStore = Depends(get_store),
):
    log = LogContext("TREE_URLS_SAVE")
    try:
        payload = body.decode("utf-8")
    except UnicodeDecodeError:
        return bad_request("request body is not valid UTF-8")
    try:
        created = tree_urls_svc.save_tree_urls(store, sha1, payload, log)
    except ValidationError as ve:
        return bad_request(str(ve))
    except StorageError as se:
        log.write("ERROR", str(se))
        return errored(str(se))
    log.write("CREATED" if created else "OK")
    return TreeURLsOut(tree_urls=payload)


@router.delete("/{sha1}")
def api_tree_urls_delete(sha1: str, store: TreeURLStore = Depends(get_store)):
    log = LogContext("TREE_URLS_DELETE")
    try:
        tree_urls_svc.delete_tree_urls(store, sha1, log)
    except ValidationError as ve:
        return bad_request(str(ve))
    except StorageError as se:
        log.write("ERROR", str(se))
        return errored(str(se))
    log.write("OK")
    return Response(status_code=200)
