"""
Endpoint extraction from generated API source files.

Generated API classes expose each operation as an async method returning
a Promise. This module enumerates those methods without compiling or
executing the generated code.
"""

import logging
from collections.abc import Mapping
from typing import Optional

from sdk_change_analyzer.loader import is_size_marker
from sdk_change_analyzer.models.endpoint import EndpointDescriptor, EndpointKind
from sdk_change_analyzer.parser.signatures import scan_async_signatures

logger = logging.getLogger(__name__)


class EndpointExtractor:
    """
    Extract async API methods from generated TypeScript files.

    Extraction is purely syntactic and idempotent: the same text always
    yields the same descriptors, in declaration order.
    """

    @staticmethod
    def extract(text: str, file_path: str) -> list[EndpointDescriptor]:
        """
        Extract the async methods declared in one file.

        Args:
            text: Full source text of a generated API file.
            file_path: Path of that file, recorded on each descriptor.

        Returns:
            List of EndpointDescriptor in declaration order.
        """
        return [
            EndpointDescriptor(
                name=signature.name,
                file_path=file_path,
                kind=EndpointKind.API_METHOD,
                return_type=signature.return_type,
                line_number=signature.line_number,
            )
            for signature in scan_async_signatures(text)
        ]

    @classmethod
    def extract_many(
        cls,
        files: Mapping[str, str],
        warnings: Optional[list[str]] = None,
    ) -> list[EndpointDescriptor]:
        """
        Extract endpoints from several files, visiting paths alphabetically.

        Files whose content is a size-limit marker are skipped.

        Args:
            files: Mapping of file path to source text.
            warnings: Optional list that receives a message per skipped file.

        Returns:
            List of EndpointDescriptor grouped by file, in path order.
        """
        endpoints: list[EndpointDescriptor] = []
        for path in sorted(files):
            text = files[path]
            if is_size_marker(text):
                message = f"Skipped endpoint extraction for oversized file {path}"
                logger.warning(message)
                if warnings is not None:
                    warnings.append(message)
                continue
            endpoints.extend(cls.extract(text, path))
        return endpoints
