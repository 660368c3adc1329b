"""Command line entry point: translate the missing strings of a catalog."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from aitranslate.ai import AIService, TranslationError, validate_ai_config
from aitranslate.config import load_config
from aitranslate.core import CatalogIOError, load_catalog, save_catalog
from aitranslate.language_codes import parse_language_list
from aitranslate.logger import get_logger, set_log_mode
from aitranslate.translation import TranslationManager

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aitranslate",
        description="Translate the missing entries of an .xcstrings catalog with an AI provider.",
    )
    parser.add_argument("input_file", type=Path, help="Path to the .xcstrings catalog")
    parser.add_argument(
        "-l", "--languages",
        required=True,
        type=parse_language_list,
        help="A comma separated list of language codes (must match the language codes used by xcstrings)",
    )
    parser.add_argument(
        "-k", "--keys",
        action="append",
        default=[],
        help="Key to translate (repeatable); if not provided all keys are translated",
    )
    parser.add_argument(
        "-e", "--existing-translations",
        action="append",
        default=[],
        help="Key whose existing translation is always passed as a hint (repeatable)",
    )
    parser.add_argument(
        "-a", "--additional-context",
        default="",
        help="Additional context to provide to the translation service",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests and translations")
    parser.add_argument(
        "-s", "--skip-backup",
        action="store_true",
        help="By default a backup of the input will be created. When this flag is provided, the backup is skipped.",
    )
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Forces all strings to be translated, even if an existing translation is present.",
    )
    parser.add_argument("-r", "--remove-stale", action="store_true", help="Removes stale keys from the output file.")
    parser.add_argument("-o", "--openai-key", help="API key for the selected provider (overrides config)")
    parser.add_argument("--provider", help="AI provider: openai, deepseek, gemini or a custom provider from config")
    parser.add_argument("--model", help="Model to use instead of the provider's default")
    parser.add_argument("--config", help="Path to a JSON config file")
    return parser


def main(argv: Optional[List[str]] = None, service=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        logger.error(str(e))
        return 1

    set_log_mode('debug' if args.verbose else config.get('log_mode', 'info'), config.get('log_file'))

    if not args.languages:
        logger.error("No target languages given")
        return 2

    if service is None:
        provider = args.provider or config.get('ai_provider', 'openai')
        if args.openai_key:
            config.setdefault(provider, {})['api_key'] = args.openai_key
        try:
            validate_ai_config(config, provider)
        except TranslationError as e:
            logger.error(str(e))
            return 1
        service = AIService(config=config, model_override=args.model, provider_override=provider)

    try:
        catalog = load_catalog(args.input_file)

        manager = TranslationManager(
            service=service,
            languages=args.languages,
            keys=args.keys,
            existing_translation_keys=args.existing_translations,
            additional_context=args.additional_context,
            force=args.force,
        )
        result = manager.run(catalog)

        save_catalog(
            catalog,
            args.input_file,
            remove_stale=args.remove_stale,
            skip_backup=args.skip_backup,
        )
    except CatalogIOError as e:
        logger.error(f"{e} [{e.code}]")
        return 1

    minutes, seconds = divmod(int(result["elapsed_time"]), 60)
    logger.info(
        f"[✅] 100% - translated {result['total_translated']}, failed {result['total_failed']} "
        f"[⏰] {minutes}m {seconds}s"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
