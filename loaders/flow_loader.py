import logging
import os
from typing import Union

from flowgraph.schema import FlowDocument, ParseError
from flowgraph.serializer import dump_document, parse_document

logger = logging.getLogger(__name__)


class FlowLoader:
    """File surface for flow documents (a single .json file)"""

    def load_from_file(self, file_path: str) -> Union[FlowDocument, ParseError]:
        """Load a flow document; parse failures are logged and returned, not raised"""
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Flow file not found: {file_path}")

        if not file_path.lower().endswith(".json"):
            error = ParseError(message="Only .json flow files are accepted", details=[file_path])
            logger.error(f"Failed to load flow from {file_path}: {error}")
            return error

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                text = f.read()
        except (UnicodeDecodeError, OSError) as e:
            error = ParseError(message="Flow file could not be read", details=[str(e)])
            logger.error(f"Failed to load flow from {file_path}: {error}")
            return error

        result = parse_document(text)
        if isinstance(result, ParseError):
            logger.error(f"Failed to load flow from {file_path}: {result}")
            return result

        logger.info(f"Loaded {len(result.nodes)} nodes from {file_path}")
        return result

    def save_to_file(self, document: FlowDocument, file_path: str) -> str:
        directory = os.path.dirname(os.path.abspath(file_path))
        os.makedirs(directory, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(dump_document(document))
        logger.info(f"Flow saved: {file_path}")
        return file_path


def load_flow(file_path: str) -> Union[FlowDocument, ParseError]:
    """Convenience function to load a flow document"""
    return FlowLoader().load_from_file(file_path)


def save_flow(document: FlowDocument, file_path: str) -> str:
    return FlowLoader().save_to_file(document, file_path)
