"""Ingest runner entry point.

Loads a UTF-8 text file into the knowledge base through the same chunk →
embed → insert pipeline as POST /upload.

Usage:
    python -m services.kb_ingest.ingest_runner path/to/file.txt --title "Акт проверки" [--source ...] [--category ...]
"""

import argparse
import asyncio
from pathlib import Path

from server.models.requests import UploadRequest
from services.kb_ingest.IngestService import IngestService
from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.embed.EmbeddingProvider import EmbeddingProvider
from shared.clients.store.StoreClientManager import StoreClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Add a text document to the case knowledge base.")
    parser.add_argument("path", type=Path, help="UTF-8 text file to ingest")
    parser.add_argument("--title", help="document title (defaults to the file name)")
    parser.add_argument("--source", help="provenance label (defaults to the title)")
    parser.add_argument("--category", help="classification tag (defaults to 'документ')")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Run a one-shot ingest. Returns the process exit code."""
    args = parse_args(argv)
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    content = args.path.read_text(encoding="utf-8")
    request = UploadRequest(
        title=args.title or args.path.stem,
        content=content,
        source=args.source,
        category=args.category,
    )

    store_client = StoreClientManager(helper_config=config).get_client()
    embed_clients = EmbedClientManager(helper_config=config).get_clients()

    try:
        # the store is required; embedding failures only cost the vectors
        try:
            await store_client.boot()
            response = await store_client.do_healthcheck()
            if not response.is_success:
                raise RuntimeError(f"healthcheck returned status {response.status_code}")
        except Exception as e:
            logger.error(f"Error booting store client {store_client.get_engine_name()}: {e}. Aborting.")
            return 1
        for embed_client in embed_clients:
            await embed_client.boot()

        ingest_service = IngestService(
            helper_config=config,
            embedding_provider=EmbeddingProvider(helper_config=config, embed_clients=embed_clients),
            store_client=store_client,
        )
        result = await ingest_service.ingest(request)
        logger.info("%s (%d of %d chunk(s) embedded).", result.message, result.embedded, len(result.documents), color="green")
        return 0
    finally:
        await store_client.close()
        for embed_client in embed_clients:
            await embed_client.close()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
