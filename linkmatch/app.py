import argparse
import json
import time
from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .cache import SearchCache
from .contacts import ContactParseError, filter_contacts, parse_contacts
from .database import DEFAULT_DB_PATH
from .env import google_credentials, load_env
from .logger import get_logger
from .matching import CandidateProfile, ConfigError, Confidence, Contact, ContactMatcher, MatchingConfig
from .report import ContactMatches, render_match, write_report
from .retry import CircuitOpenError, RetryError
from .schema import validate_contact_record, validate_profile_record
from .search import ProfileSearcher, build_queries, build_query_urls

DEFAULT_INPUT = Path("contacts.vcf")
DRY_RUN_PREVIEW = 10

WEIGHT_FLAGS = {
    "email": "email_weight",
    "name": "name_weight",
    "company": "company_weight",
    "location": "location_weight",
    "job_title": "job_title_weight",
}


def build_config(args: argparse.Namespace) -> MatchingConfig:
    """Environment config with CLI flags layered on top."""
    try:
        config = MatchingConfig.from_env()
        weights = {
            field: getattr(args, flag)
            for field, flag in WEIGHT_FLAGS.items()
            if getattr(args, flag, None) is not None
        }
        overrides = {
            name: getattr(args, name)
            for name in ("algorithm", "name_threshold", "company_threshold")
            if getattr(args, name, None) is not None
        }
        return replace(config, weights=replace(config.weights, **weights), **overrides)
    except ConfigError as e:
        raise SystemExit(f"Invalid matching configuration: {e}")


def load_contacts(inputs: Sequence[Path], fmt: Optional[str] = None) -> List[Contact]:
    contacts: List[Contact] = []
    for path in inputs:
        path = Path(path)
        if not path.exists():
            raise SystemExit(f"Input file not found: {path}")
        try:
            contacts.extend(parse_contacts(path, fmt))
        except ContactParseError as e:
            raise SystemExit(str(e))
    return contacts


def run_matching(
    contacts: Sequence[Contact],
    searcher: ProfileSearcher,
    matcher: ContactMatcher,
    cache: Optional[SearchCache] = None,
    min_score: float = 40,
    limit: int = 3,
    contact_delay: float = 2.0,
) -> List[ContactMatches]:
    """
    Search, score and filter matches for each contact.

    A failed search counts as "no candidates" for that contact; the batch
    keeps going.
    """
    logger = get_logger()
    results: List[ContactMatches] = []
    total = len(contacts)

    for i, contact in enumerate(contacts, 1):
        progress = f"[{i}/{total}]"
        profiles = cache.get(contact) if cache else None
        searched = False

        if profiles is not None:
            print(f"{progress} {contact.full_name} (cached) - {len(profiles)} profiles")
        else:
            searched = True
            try:
                profiles = searcher.search(contact)
                if cache:
                    cache.set(contact, profiles)
                print(f"{progress} {contact.full_name} - Found {len(profiles)} profiles")
            except (ValueError, RetryError, CircuitOpenError) as e:
                logger.error("Search failed", contact=contact.full_name, error=str(e))
                print(f"{progress} {contact.full_name} - Search failed: {e}")
                profiles = []

        matches = matcher.match_contact(contact, profiles)
        matches = [m for m in matches if m.score >= min_score][:limit]
        if matches:
            logger.record_contact_matched()
        results.append(ContactMatches(contact=contact, matches=matches))

        if searched and i < total and contact_delay > 0:
            time.sleep(contact_delay)

    return results


def print_summary(results: Sequence[ContactMatches]) -> None:
    total = len(results)
    with_matches = sum(1 for r in results if r.matches)
    print("Summary:")
    print(f"  Total Contacts: {total}")
    print(f"  With Matches: {with_matches}")
    print(f"  No Matches: {total - with_matches}")

    # Confidence of each contact's best match
    distribution = Counter(r.matches[0].confidence for r in results if r.matches)
    if distribution:
        print("  Confidence Distribution:")
        for band in Confidence:
            if distribution[band]:
                print(f"    {band.value}: {distribution[band]}")


def show_dry_run(contacts: Sequence[Contact]) -> None:
    print("Dry Run - Contacts that would be searched:\n")
    for i, contact in enumerate(contacts[:DRY_RUN_PREVIEW], 1):
        print(f"{i}. {contact.full_name}")
        if contact.company:
            print(f"   Company: {contact.company}")
        if contact.job_title:
            print(f"   Title: {contact.job_title}")
        if contact.location:
            print(f"   Location: {contact.location}")
        for url in build_query_urls(build_queries(contact)):
            print(f"   Query: {url}")
        print()
    if len(contacts) > DRY_RUN_PREVIEW:
        print(f"... and {len(contacts) - DRY_RUN_PREVIEW} more contacts")


def cmd_match(args: argparse.Namespace) -> None:
    config = build_config(args)
    inputs = args.input or [DEFAULT_INPUT]
    contacts = load_contacts(inputs, args.format)
    print(f"Parsed {len(contacts)} contacts")

    filtered = filter_contacts(contacts, args.filter)
    if len(filtered) != len(contacts):
        print(f"  Filtered to {len(filtered)} contacts matching \"{args.filter}\"")
    if not filtered:
        print("No contacts to process.")
        return

    if args.dry_run:
        show_dry_run(filtered)
        return

    api_key, cse_id = google_credentials(args.api_key, args.cse_id)
    searcher = ProfileSearcher(api_key=api_key, cse_id=cse_id)
    if searcher.provider == "google-html":
        print("[warn] No Google Custom Search credentials; falling back to HTML results.")
    cache = None if args.no_cache else SearchCache(Path(args.db))

    results = run_matching(
        filtered,
        searcher,
        ContactMatcher(config),
        cache=cache,
        min_score=args.min_score,
        limit=args.limit,
    )

    output = write_report(Path(args.output), results, max_score=config.max_score)
    print(f"\nReport generated: {output}\n")
    print_summary(results)
    get_logger().log_metrics_summary()


def _read_json(path: Path):
    path = Path(path)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON in {path}: {e}")


def cmd_score(args: argparse.Namespace) -> None:
    """Score already-collected profiles for one contact, no network."""
    config = build_config(args)

    contact_data = _read_json(args.contact)
    errors = validate_contact_record(contact_data)
    if errors:
        print("Invalid contact:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)

    profile_data = _read_json(args.profiles)
    if not isinstance(profile_data, list):
        raise SystemExit("Profiles file must contain an array of profiles")
    profiles = []
    for i, record in enumerate(profile_data):
        errors = validate_profile_record(record)
        if errors:
            print(f"[skip] profile {i}: {'; '.join(errors)}")
            continue
        profiles.append(CandidateProfile.from_dict(record))

    first = contact_data.get("firstName") or ""
    last = contact_data.get("lastName") or ""
    contact = Contact(
        full_name=contact_data.get("fullName") or f"{first} {last}".strip(),
        first_name=first,
        last_name=last,
        emails=contact_data.get("emails") or (),
        company=contact_data.get("company"),
        job_title=contact_data.get("jobTitle"),
        location=contact_data.get("location"),
        source="json",
    )

    matches = ContactMatcher(config).match_contact(contact, profiles)
    if args.limit is not None:
        matches = matches[:args.limit]
    if not matches:
        print("No candidates to score.")
        return
    print(f"Ranked {len(matches)} candidates for {contact.full_name}:\n")
    for i, match in enumerate(matches, 1):
        print("\n".join(render_match(match, i, config.max_score)))
        print()


def cmd_cache_clear(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        print(f"No cache at {db_path}")
        return
    removed = SearchCache(db_path).clear()
    print(f"Cleared {removed} cached searches.")


def _add_matching_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--algorithm", choices=["levenshtein", "jaro-winkler"], help="String similarity algorithm (default: jaro-winkler)")
    p.add_argument("--email-weight", type=float, help="Weight for email matching (default: 50)")
    p.add_argument("--name-weight", type=float, help="Weight for name matching (default: 30)")
    p.add_argument("--company-weight", type=float, help="Weight for company matching (default: 15)")
    p.add_argument("--location-weight", type=float, help="Weight for location matching (default: 10)")
    p.add_argument("--job-title-weight", type=float, help="Weight for job title matching (default: 5)")
    p.add_argument("--name-threshold", type=float, help="Minimum name similarity 0-1 (default: 0.7)")
    p.add_argument("--company-threshold", type=float, help="Minimum company similarity 0-1 (default: 0.6)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkmatch", description="Find LinkedIn profiles for your contacts")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")

    mat = subparsers.add_parser("match", help="Search profiles for contacts and write a markdown report")
    mat.add_argument("-i", "--input", nargs="+", type=Path, help="Contact files (vCard or JSON). Default: contacts.vcf")
    mat.add_argument("--format", choices=["vcard", "json"], help="Input format (auto-detected from extension)")
    mat.add_argument("-o", "--output", default="linkedin-matches.md", help="Output markdown file (default: linkedin-matches.md)")
    mat.add_argument("-l", "--limit", type=int, default=3, help="Matches kept per contact (default: 3)")
    mat.add_argument("-m", "--min-score", type=float, default=40, help="Minimum match score (default: 40)")
    mat.add_argument("-f", "--filter", help="Only contacts whose name contains this text")
    mat.add_argument("--dry-run", action="store_true", help="Show what would be searched without searching")
    mat.add_argument("--no-cache", action="store_true", help="Ignore cached results and force fresh searches")
    mat.add_argument("--api-key", help="Google API key (or set GOOGLE_API_KEY)")
    mat.add_argument("--cse-id", help="Custom Search Engine ID (or set GOOGLE_CSE_ID)")
    mat.add_argument("--db", default=str(DEFAULT_DB_PATH), help=f"Cache database (default: {DEFAULT_DB_PATH})")
    _add_matching_options(mat)
    mat.set_defaults(func=cmd_match)

    sco = subparsers.add_parser("score", help="Rank already-collected profiles for one contact")
    sco.add_argument("--contact", required=True, type=Path, help="Contact JSON object")
    sco.add_argument("--profiles", required=True, type=Path, help="JSON array of candidate profiles")
    sco.add_argument("-l", "--limit", type=int, help="Show only the top N matches")
    _add_matching_options(sco)
    sco.set_defaults(func=cmd_score)

    clr = subparsers.add_parser("cache-clear", help="Delete all cached search results")
    clr.add_argument("--db", default=str(DEFAULT_DB_PATH), help=f"Cache database (default: {DEFAULT_DB_PATH})")
    clr.set_defaults(func=cmd_cache_clear)

    return parser


def main(argv: Optional[Sequence[str]] = None):
    # Load .env if present (GOOGLE_API_KEY, GOOGLE_CSE_ID, LINKMATCH_*)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
