from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import mimetypes
import os
import sys
from typing import Any, Sequence

from pydantic import BaseModel

from catalog_console.container import Container
from catalog_console.core.config import Settings
from catalog_console.core.errors import ApiError, PermissionDeniedError, TokenDecodeError, UnauthorizedError, describe_error
from catalog_console.infrastructure.logging import get_logger, setup_logging
from catalog_console.orchestrator.file_cards import FileCardList, validate_media_files
from catalog_console.orchestrator.types import PendingUpload, ProductDraft

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catalog-console", description="Catalog admin console.")
    parser.add_argument("--env-file", default=None, help="Optional .env file with CATALOG_* settings.")
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Log in and persist the session.")
    login.add_argument("--username", required=True)
    login.add_argument("--password", default=None, help="Prompted for when omitted.")

    commands.add_parser("logout", help="Clear the persisted session.")
    commands.add_parser("whoami", help="Validate the persisted session and print the identity.")

    products = commands.add_parser("products", help="Product commands.")
    product_commands = products.add_subparsers(dest="product_command", required=True)
    product_commands.add_parser("list", help="List products.")
    save = product_commands.add_parser("save", help="Create or update a product with media.")
    save.add_argument("--metadata", required=True, help="Path to a JSON file with product fields.")
    save.add_argument("--product-id", default=None, help="Existing product to update.")
    save.add_argument("--file", dest="files", action="append", default=[], help="Media file to attach.")
    save.add_argument("--drop", action="append", default=[], help="Existing file id to leave out of the order.")
    save.add_argument(
        "--order",
        default=None,
        help="Comma separated final order of existing file ids and new file names.",
    )

    categories = commands.add_parser("categories", help="Category commands.")
    category_commands = categories.add_subparsers(dest="category_command", required=True)
    category_commands.add_parser("list", help="List categories.")
    return parser


def _dump(value: Any) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    elif isinstance(value, list):
        value = [item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in value]
    return json.dumps(value, indent=2, ensure_ascii=False)


def _read_upload(path: str) -> PendingUpload:
    content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    with open(path, "rb") as handle:
        content = handle.read()
    return PendingUpload(filename=os.path.basename(path), content=content, content_type=content_type)


async def _require_session(container: Container) -> None:
    await container.session_manager.validate_session()
    if not container.session_manager.is_authenticated:
        raise UnauthorizedError(401, "Not logged in")


async def _save_product(container: Container, args: argparse.Namespace) -> dict[str, Any]:
    with open(args.metadata, encoding="utf-8") as handle:
        metadata = json.load(handle)

    existing = None
    if args.product_id:
        existing = await container.product_service.get_product(args.product_id)
    cards = FileCardList.from_product(existing)
    unknown = [file_id for file_id in args.drop if file_id not in {card.id for card in cards}]
    if unknown:
        raise ValueError(f"Unknown file ids in --drop: {', '.join(unknown)}")
    for file_id in dict.fromkeys(args.drop):
        cards.remove(file_id)

    uploads = [_read_upload(path) for path in args.files]
    errors = validate_media_files(
        uploads,
        accept=container.settings.upload_accept_list,
        max_files=container.settings.upload_max_files,
    )
    if errors:
        raise ValueError("; ".join(errors))
    added = cards.add_files(uploads)

    if args.order:
        ids_by_token = {card.id: card.id for card in cards}
        ids_by_token.update({card.name: card.id for card in added})
        wanted = [token.strip() for token in args.order.split(",") if token.strip()]
        missing = [token for token in wanted if token not in ids_by_token]
        if missing:
            raise ValueError(f"Unknown entries in --order: {', '.join(missing)}")
        cards.reorder([ids_by_token[token] for token in wanted])

    draft = ProductDraft(metadata=metadata, product_id=args.product_id)
    result = await container.product_save.save(
        draft,
        new_files=cards.pending_uploads(),
        ordered_cards=cards.cards,
    )
    return {
        "product": result.product.model_dump(mode="json"),
        "created": result.created,
        "order": [entry.model_dump() for entry in result.order],
        "refreshError": result.refresh_error.message if result.refresh_error else None,
    }


async def run(args: argparse.Namespace, container: Container) -> str:
    manager = container.session_manager
    if args.command == "login":
        password = args.password if args.password is not None else getpass.getpass("Password: ")
        session = await manager.login(args.username, password)
        return _dump({"id": session.admin_id, "username": session.username, "role": session.role})
    if args.command == "logout":
        manager.logout()
        return _dump({"status": "logged_out"})
    if args.command == "whoami":
        await _require_session(container)
        session = manager.session
        assert session is not None
        return _dump({"id": session.admin_id, "username": session.username, "role": session.role})

    await _require_session(container)
    if args.command == "products" and args.product_command == "list":
        return _dump(await container.product_service.list_products())
    if args.command == "products" and args.product_command == "save":
        return _dump(await _save_product(container, args))
    if args.command == "categories" and args.category_command == "list":
        return _dump(await container.category_service.list_categories())
    raise ValueError(f"Unsupported command: {args.command}")


async def _main_async(args: argparse.Namespace, settings: Settings) -> int:
    container = Container(settings)
    try:
        print(await run(args, container))
        return 0
    except UnauthorizedError as exc:
        if args.command == "login":
            print("Incorrect username or password.", file=sys.stderr)
        else:
            print(describe_error(exc), file=sys.stderr)
        return 1
    except (ApiError, TokenDecodeError, PermissionDeniedError, ValueError, OSError) as exc:
        logger.debug("command_failed", command=args.command, error=str(exc))
        print(describe_error(exc), file=sys.stderr)
        return 1
    finally:
        await container.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env(args.env_file)
    setup_logging(settings.log_level, json_output=settings.log_json)
    return asyncio.run(_main_async(args, settings))


if __name__ == "__main__":
    raise SystemExit(main())
