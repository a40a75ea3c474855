#!/usr/bin/env python3
"""
Command-line evidence retrieval.
Embeds a query, searches the configured vector index and prints the numbered findings.
"""

import argparse
import importlib
import sys
from pathlib import Path

import dotenv

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from evidence_retrieval.core import config as config_module
from evidence_retrieval.core.render import classify_answer
from evidence_retrieval.core.retrieval_service import retrieve_and_format
from util.logging import logger


def build_parser():
    parser = argparse.ArgumentParser(
        description="Retrieve ranked evidence passages for a query",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "chest pain radiating to left arm"
  %(prog)s "fever and cough" --top-k 3 --namespace cardiology

Environment variables:
- PINECONE_API_KEY=... (required for VECTOR_PROVIDER=pinecone)
- PINECONE_INDEX_NAME=... (default index, overridden by --index)
- PINECONE_NAMESPACE=... (default namespace, overridden by --namespace)
- EMBED_MODEL_NAME=mixedbread-ai/mxbai-embed-large-v1 (default)
- RETRIEVAL_TOP_K=5 (default)
        """
    )

    parser.add_argument("query", help="Free-text query to embed and search for")
    parser.add_argument("--index", "-i", dest="index_name", help="Index name")
    parser.add_argument("--namespace", "-n", help="Namespace within the index")
    parser.add_argument("--top-k", "-k", type=int, help="Number of matches to request")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log embedding samples and every fetched chunk")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logger.set_debug(args.verbose or config_module.debug_enabled())

    index_name = args.index_name or config_module.PINECONE_INDEX_NAME
    if not index_name:
        print("ERROR: No index configured. Set PINECONE_INDEX_NAME or pass --index", file=sys.stderr)
        return 1

    if args.top_k is not None and args.top_k < 1:
        print("ERROR: --top-k must be >= 1", file=sys.stderr)
        return 1

    result = retrieve_and_format(args.query, index_name=index_name, namespace=args.namespace, top_k=args.top_k)
    print(result)

    return 1 if classify_answer(result) == "error" else 0


if __name__ == "__main__":
    # Load environment variables from .env file, then re-read configuration
    dotenv.load_dotenv()
    importlib.reload(config_module)
    sys.exit(main())
