#!/usr/bin/env python3
"""
Build the origin and class catalog from the whole rules document.

The origins section is read from the top of the segmented document until
the class template; classes are read from an independent cursor that
starts at the first level I class and runs to the end of the document.

Run this script to regenerate the cached catalog from a plain-text export:

    python -m greed_rules.parse_all rules.txt --cache data/class_cache.json
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from greed_rules.class_cache import ClassCache
from greed_rules.config import load_config
from greed_rules.errors import CacheLoadError, FormatChangeError, IngestError
from greed_rules.models import ClassRecord, OriginRecord
from greed_rules.parse_classes import CLASSES_END_SENTINEL, extract_class
from greed_rules.parse_document import segment
from greed_rules.parse_helpers import LineReader, is_blank
from greed_rules.parse_origins import HUMAN_ORIGIN, extract_origin
from greed_rules.sources import DocumentSource, LocalDocumentSource

logger = logging.getLogger(__name__)

ORIGINS_END_SENTINELS = ('Template', 'Idea Bank')
CLASS_START_SENTINEL = '(I)'
CLASS_HEADER_MARKER = '('
DEFAULT_NEXT_ORIGIN = 'Dwarf'


def is_origins_end(line: str) -> bool:
    return line.startswith(ORIGINS_END_SENTINELS)


def is_not_blank(line: str) -> bool:
    return not is_blank(line)


def parse_origin_section(lines: Sequence[str], next_origin_after_human: str = DEFAULT_NEXT_ORIGIN) -> List[OriginRecord]:
    """Extract every origin up to the class template.

    The Human origin consumes none of its text, so after it the cursor jumps
    to the origin that follows it in the document.
    """
    reader = LineReader(lines)
    origins = []

    line = reader.skip_to(is_not_blank)
    while True:
        if line is None:
            logger.error("Origins section never reached %s", ' or '.join(ORIGINS_END_SENTINELS))
            raise FormatChangeError(f"Origins section does not end with a {ORIGINS_END_SENTINELS[0]!r} line")
        if is_origins_end(line):
            break

        origin = extract_origin(line, reader)
        origins.append(origin)
        logger.debug("Parsed origin %s", origin.name)

        if origin.name == HUMAN_ORIGIN:
            line = reader.skip_to(lambda l: l.startswith(next_origin_after_human) or is_origins_end(l))
        else:
            line = reader.skip_to(is_not_blank)

    return origins


def parse_class_section(lines: Sequence[str]) -> List[ClassRecord]:
    """Extract every class from the first level I class to the end."""
    reader = LineReader(lines)
    classes = []

    if reader.skip_to(lambda l: l.startswith(ORIGINS_END_SENTINELS[0])) is None:
        raise FormatChangeError(f"No {ORIGINS_END_SENTINELS[0]!r} line before the classes")

    line = reader.skip_to(lambda l: CLASS_START_SENTINEL in l)
    if line is None:
        logger.error("No class header containing %r", CLASS_START_SENTINEL)
        raise FormatChangeError(f"No class header containing {CLASS_START_SENTINEL!r}")

    while line is not None and not line.startswith(CLASSES_END_SENTINEL):
        class_record = extract_class(line, reader)
        classes.append(class_record)
        logger.debug("Parsed class %s (level %s)", class_record.name, class_record.level)
        line = reader.skip_to(lambda l: CLASS_HEADER_MARKER in l or l.startswith(CLASSES_END_SENTINEL))

    return classes


def check_unique(records, kind: str) -> None:
    seen = set()
    for record in records:
        if record.name in seen:
            raise FormatChangeError(f"Duplicate {kind} name {record.name!r}")
        seen.add(record.name)


def build_catalog(lines: Sequence[str], last_modified: Optional[datetime] = None,
                  next_origin_after_human: str = DEFAULT_NEXT_ORIGIN) -> ClassCache:
    """Parse the segmented document into a new ClassCache.

    Any error aborts the whole build; there is no partial catalog.
    """
    lines = list(lines)
    origins = parse_origin_section(lines, next_origin_after_human)
    classes = parse_class_section(lines)
    check_unique(origins, 'origin')
    check_unique(classes, 'class')

    logger.info("Parsed %d origins and %d classes", len(origins), len(classes))
    return ClassCache(origins, classes, last_modified)


def refresh_catalog(current: Optional[ClassCache], source: DocumentSource,
                    next_origin_after_human: str = DEFAULT_NEXT_ORIGIN) -> ClassCache:
    """Return a catalog for the source's current revision.

    When the document's last-modified time matches the current cache, the
    current cache is returned and the text is never fetched or parsed.
    """
    last_modified = source.fetch_last_modified()
    if current is not None and not current.is_stale(last_modified):
        logger.info("Rules document unchanged since %s", last_modified)
        return current

    lines = segment(source.fetch_text())
    return build_catalog(lines, last_modified, next_origin_after_human)


def write_catalog(cache: ClassCache, output_file: Path, output_format: str) -> None:
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w', encoding='utf-8') as f:
        if output_format == 'yaml':
            yaml.safe_dump(cache.to_dict(), f, sort_keys=False, allow_unicode=True)
        else:
            json.dump(cache.to_dict(), f, indent=2, ensure_ascii=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse the Greed rules export into an origin and class catalog.")
    parser.add_argument('export', type=Path, help="Plain-text export of the rules document")
    parser.add_argument('--cache', type=Path, help="Class cache file to read and update")
    parser.add_argument('--config', type=Path, help="YAML settings file")
    parser.add_argument('--output', type=Path, help="Also write the catalog to this file")
    parser.add_argument('--format', choices=('json', 'yaml'), default='json', help="Format for --output")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log every parsed record")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    cache_path = args.cache or Path(config.cache_path)
    print(f"Parsing rules from {args.export}...")

    try:
        current = ClassCache.load(cache_path)
    except CacheLoadError as e:
        print(f"Warning: {e}; rebuilding from scratch")
        current = ClassCache()

    try:
        cache = refresh_catalog(current, LocalDocumentSource(args.export), config.next_origin_after_human)
    except IngestError as e:
        print(f"ERROR: {type(e).__name__}: {e}", file=sys.stderr)
        print(f"Keeping the existing catalog in {cache_path}")
        return 1

    if cache is current:
        print(f"Rules document unchanged, {cache_path} is up to date")
    else:
        print(f"\nWriting {len(cache.origins)} origins and {cache.get_class_cache_count()} classes to {cache_path}...")
        cache.save(cache_path)

    if args.output:
        write_catalog(cache, args.output, args.format)
        print(f"Catalog written to {args.output}")

    print("Done!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
