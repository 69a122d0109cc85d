from __future__ import annotations

import logging
import re

from ..errors import NotFoundError, StorageError, ValidationError
from ..logs import LogContext
from ..storage import TreeURLStore

logger = logging.getLogger(__name__)

SHA1_RE = re.compile(r"^[0-9a-fA-F]{40}$")


def valid_sha1(s: str) -> bool:
    return bool(SHA1_RE.fullmatch(s or ""))


def check_sha1(sha1: str):
    if not valid_sha1(sha1):
        raise ValidationError(f"sha1 is not in a valid format: {sha1}")


def get_tree_urls(store: TreeURLStore, sha1: str) -> list[str]:
    check_sha1(sha1)
    try:
        found = store.has_sha1(sha1)
    except Exception as e:
        logger.exception("checking for sha1 %s failed", sha1)
        raise StorageError(f"error checking for sha1 {sha1}") from e
    if not found:
        raise NotFoundError(f"sha1 {sha1} was not found")
    try:
        return store.get_tree_urls(sha1)
    except Exception as e:
        logger.exception("fetching tree urls for %s failed", sha1)
        raise StorageError(f"error getting tree urls for {sha1}") from e


def save_tree_urls(store: TreeURLStore, sha1: str, tree_urls: str, log: LogContext) -> bool:
    """
    Insert or replace the payload for sha1. Returns True when a new record was created.

    Existence is checked first, then a single insert or update is issued; two writers
    racing on an unseen sha1 are settled by the table's primary key.
    """
    check_sha1(sha1)
    log.set_entity("tree_urls", sha1)
    log.set_payload(tree_urls)
    try:
        found = store.has_sha1(sha1)
    except Exception as e:
        logger.exception("checking for sha1 %s failed", sha1)
        raise StorageError(f"error checking for sha1 {sha1}") from e
    try:
        if found:
            store.update_tree_urls(sha1, tree_urls)
        else:
            store.insert_tree_urls(sha1, tree_urls)
    except Exception as e:
        logger.exception("storing tree urls for %s failed", sha1)
        raise StorageError(f"error storing tree urls for {sha1}") from e
    return not found


def delete_tree_urls(store: TreeURLStore, sha1: str, log: LogContext):
    check_sha1(sha1)
    log.set_entity("tree_urls", sha1)
    try:
        store.delete_tree_urls(sha1)
    except Exception as e:
        logger.exception("deleting tree urls for %s failed", sha1)
        raise StorageError(f"error deleting tree urls for {sha1}") from e
