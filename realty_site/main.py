"""
Main entry point and CLI for the realty site.

Provides command-line access to the property search and location
suggestions, and starts the HTTP API.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

import asyncio
import argparse
import logging
import sys
from datetime import datetime
from typing import Dict, List, Optional

from realty_site.config import get_site_settings, SITE_CONFIG
from realty_site.error_handling import CriteriaError
from realty_site.listings.media import cover_image
from realty_site.models import (
    LocationSuggestion,
    PropertyRecord,
    PropertyStatus,
    PropertyType,
    SearchCriteria,
)
from realty_site.search import (
    LocationSuggestionResolver,
    PropertyQueryComposer,
    SEARCH_ERROR_MESSAGE,
    not_found_message,
)
from realty_site.store import create_store


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_price(price: Optional[float]) -> str:
    """Format a price as Brazilian reais, e.g. ``R$ 1.250.000``."""
    if price is None:
        return "Preço sob consulta"
    return "R$ " + f"{price:,.0f}".replace(",", ".")


def format_property(record: PropertyRecord, base_url: str = "", bucket: str = "properties") -> str:
    """
    Format a property for console output.

    Args:
        record: PropertyRecord to format
        base_url: Store URL used to resolve image paths
        bucket: Storage bucket holding the images

    Returns:
        Formatted string representation of the property
    """
    lines = []

    lines.append(f"🏠 {record.title or '[Sem título]'}")
    lines.append(f"   ID: {record.id}")
    lines.append(f"   Preço: {format_price(record.price)}")

    place = ", ".join(part for part in (record.location, record.city, record.region) if part)
    if place:
        lines.append(f"   Local: {place}")

    features = []
    if record.bedrooms is not None:
        features.append(f"{record.bedrooms} quarto(s)")
    if record.suites is not None:
        features.append(f"{record.suites} suíte(s)")
    if record.parking_spots is not None:
        features.append(f"{record.parking_spots} vaga(s)")
    if record.area is not None:
        features.append(f"{record.area:g} m²")
    if features:
        lines.append(f"   {' · '.join(features)}")

    if record.status_label:
        lines.append(f"   Status: {record.status_label}")

    if base_url:
        lines.append(f"   Imagem: {cover_image(record.images, base_url, bucket)}")

    lines.append("")  # Blank line for spacing

    return "\n".join(lines)


def format_results(records: List[PropertyRecord], base_url: str = "", bucket: str = "properties") -> str:
    """
    Format search results for console output.

    Args:
        records: Matching properties

    Returns:
        Formatted string representation of all properties
    """
    output = []
    output.append(f"\n{'='*60}")
    output.append(f"{len(records)} imóvel(is) encontrado(s)")
    output.append(f"{'='*60}\n")

    for record in records:
        output.append(format_property(record, base_url, bucket))

    output.append(f"{'='*60}\n")

    return "\n".join(output)


def format_suggestions(suggestions: Dict[str, LocationSuggestion]) -> str:
    if not suggestions:
        return "Nenhuma sugestão encontrada.\n"
    lines = [f"  {label} ({s.count})" for label, s in suggestions.items()]
    return "\n".join(lines) + "\n"


def build_criteria(
    location: Optional[str] = None,
    property_type: Optional[str] = None,
    status: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    bedrooms: Optional[int] = None,
    suites: Optional[int] = None,
    parking: Optional[int] = None
) -> SearchCriteria:
    """
    Build search criteria from CLI options.

    Raises:
        CriteriaError: If a value is negative or the price range is inverted
    """
    for name, value in (
        ("min-price", min_price), ("max-price", max_price),
        ("bedrooms", bedrooms), ("suites", suites), ("parking", parking),
    ):
        if value is not None and value < 0:
            raise CriteriaError(f"--{name} cannot be negative")

    if min_price is not None and max_price is not None and min_price > max_price:
        raise CriteriaError(
            f"Minimum price ({min_price}) cannot be greater than maximum price ({max_price})"
        )

    return SearchCriteria(
        location=location or "",
        property_type=property_type or "",
        status=status or "",
        bedrooms_min=bedrooms,
        suites_min=suites,
        parking_min=parking,
        price_min=min_price,
        price_max=max_price,
    )


async def run_search(criteria: SearchCriteria, verbose: bool = False) -> int:
    """
    Execute a property search and print the results.

    Args:
        criteria: Search criteria
        verbose: Enable verbose logging output

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    settings = get_site_settings()
    logger.info(f"Using store backend: {SITE_CONFIG['store']['backend']}")

    store = create_store(settings.store)
    composer = PropertyQueryComposer(store)
    try:
        print("\n🔍 Buscando imóveis...")
        if criteria.location:
            print(f"   Local: {criteria.location}")
        print()

        start_time = datetime.now()
        outcome = await composer.search(criteria)
        elapsed_time = (datetime.now() - start_time).total_seconds()

        if not outcome.ok:
            print(f"❌ {SEARCH_ERROR_MESSAGE}", file=sys.stderr)
            return 1

        if not outcome.records:
            print(not_found_message(criteria.location))
        else:
            print(format_results(outcome.records, settings.store.url, settings.store.image_bucket))

        logger.info(f"Search completed in {elapsed_time:.2f} seconds")
        print(f"✅ Busca concluída em {elapsed_time:.2f} segundos\n")
        return 0
    finally:
        await composer.wait_for_history()
        await store.close()


async def run_suggest(text: str) -> int:
    """Print location suggestions for partial text."""
    settings = get_site_settings()
    store = create_store(settings.store)
    try:
        resolver = LocationSuggestionResolver(
            store, min_chars=settings.search.suggestion_min_chars
        )
        suggestions = await resolver.resolve(text)
        print(format_suggestions(suggestions))
        return 0
    finally:
        await store.close()


def run_server(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> int:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    settings = get_site_settings()
    uvicorn.run(
        "realty_site.api.main:app",
        host=host or settings.api.host,
        port=port or settings.api.port,
        reload=reload,
    )
    return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="realty-site",
        description="Search properties and run the realty site API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search apartments in Jardins
  realty-site search --location Jardins --type apartment

  # Search with price range and minimum bedrooms
  realty-site search --min-price 500000 --max-price 1500000 --bedrooms 3

  # Suggest locations for partial text
  realty-site suggest jar

  # Start the API
  realty-site serve --port 8000
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search properties")
    search.add_argument("--location", type=str, default=None,
                        help="Neighborhood, city or region (e.g. 'Jardins')")
    search.add_argument("--type", dest="property_type", default=None,
                        choices=[t.value for t in PropertyType], help="Property type")
    search.add_argument("--status", default=None,
                        choices=[s.value for s in PropertyStatus], help="Property status")
    search.add_argument("--min-price", type=float, default=None, help="Minimum price")
    search.add_argument("--max-price", type=float, default=None, help="Maximum price")
    search.add_argument("--bedrooms", type=int, default=None, help="Minimum bedrooms")
    search.add_argument("--suites", type=int, default=None, help="Minimum suites")
    search.add_argument("--parking", type=int, default=None, help="Minimum parking spots")
    search.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging output")

    suggest = subparsers.add_parser("suggest", help="Suggest locations for partial text")
    suggest.add_argument("text", help="Location text typed so far")

    serve = subparsers.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Bind port")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for error, 130 when interrupted)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "search":
            criteria = build_criteria(
                location=args.location,
                property_type=args.property_type,
                status=args.status,
                min_price=args.min_price,
                max_price=args.max_price,
                bedrooms=args.bedrooms,
                suites=args.suites,
                parking=args.parking,
            )
            return asyncio.run(run_search(criteria, verbose=args.verbose))
        if args.command == "suggest":
            return asyncio.run(run_suggest(args.text))
        return run_server(args.host, args.port, args.reload)

    except CriteriaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\n\n⚠️  Interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        logger.exception(f"Unexpected error in main: {str(e)}")
        print(f"❌ Unexpected error: {str(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
