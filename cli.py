import argparse
import json
import os
import sys
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from pipelines.extract_people import PeopleExtractor
from services.content_fetcher import FetchError, fetch_page_text
from services.mapping import suggest_mappings
from services.profile_lookup import find_linkedin_url
from utils.logging_setup import init_logging


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_map_headers(args):
    mapping = suggest_mappings(args.headers)
    _print_json(mapping.model_dump(by_alias=True))


def cmd_find_linkedin(args):
    result = find_linkedin_url(args.name, args.company or "")
    _print_json(result.model_dump(exclude_none=True))
    return 0 if result.success else 1


def cmd_fetch_page(args):
    try:
        text = fetch_page_text(args.url)
    except FetchError as e:
        print(f"Fetch failed ({e.kind}): {e}", file=sys.stderr)
        return 1
    print(text)
    return 0


def cmd_scrape_event(args):
    extractor = PeopleExtractor()
    if args.url:
        outcome = extractor.from_url(args.url)
    else:
        outcome = extractor.from_text(Path(args.text_file).read_text(encoding="utf-8"))
    _print_json(outcome.model_dump(exclude_none=True))
    return 0 if outcome.success else 1


def main(argv=None):
    settings = get_settings()
    init_logging(settings.log_level)
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex

    parser = argparse.ArgumentParser(description="Prospect enrichment CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_map = sub.add_parser("map-headers", help="Guess name/company/email columns from spreadsheet headers")
    p_map.add_argument("headers", nargs="+", help="Header labels in column order")
    p_map.set_defaults(func=cmd_map_headers)

    p_find = sub.add_parser("find-linkedin", help="Resolve a LinkedIn profile URL for a person")
    p_find.add_argument("--name", required=True, help="Person's full name")
    p_find.add_argument("--company", default="", help="Company name or domain")
    p_find.set_defaults(func=cmd_find_linkedin)

    p_fetch = sub.add_parser("fetch-page", help="Print the extracted text of a web page")
    p_fetch.add_argument("--url", required=True)
    p_fetch.set_defaults(func=cmd_fetch_page)

    p_scrape = sub.add_parser("scrape-event", help="Extract speakers/attendees from an event page")
    src = p_scrape.add_mutually_exclusive_group(required=True)
    src.add_argument("--url", help="Event page URL (fetched via the content-extraction provider)")
    src.add_argument("--text-file", help="Path to already-fetched page text")
    p_scrape.set_defaults(func=cmd_scrape_event)

    args = parser.parse_args(argv)
    return args.func(args) or 0


if __name__ == "__main__":
    sys.exit(main())
