from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()

GREETING = "Hello from tree-urls."


@router.get("/", response_class=PlainTextResponse)
def greeting():
    return GREETING
