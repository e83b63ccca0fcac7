"""Run a navigation flow definition in a local Chromium browser."""
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv
from playwright.async_api import async_playwright

from browser_flow import FlowDefinitionError, load_flow_definition, run_flow_definition, setup_logging

load_dotenv()

logger = logging.getLogger('browser_flow.run_flow')


async def main(source: str, variables: dict, headless: bool = True, output: str | None = None) -> int:
    """Load the definition, run it and print (or write) the result JSON."""
    try:
        definition = await load_flow_definition(source)
    except FlowDefinitionError as e:
        logger.error(f"❌ {e}")
        return 2

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            result = await run_flow_definition(page, definition, variables)
        finally:
            await browser.close()

    payload = json.dumps(result.to_json_dict(), indent=2)
    if output:
        with open(output, 'w') as f:
            f.write(payload)
        logger.info(f"💾 Result written to {output}")
    else:
        print(payload)
    return 0 if result.succeeded else 1


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Run a browser-flow definition')
    parser.add_argument('definition', type=str, help='Path or URL of the flow definition JSON')
    parser.add_argument('--variables', type=str, help='Inline JSON object merged over the stored variables')
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    parser.add_argument('--output', type=str, help='Write the result JSON to this file')
    parser.add_argument('--log-level', type=str, default=None, help='debug, info, warning or error')
    args = parser.parse_args()

    setup_logging(args.log_level)

    extra_variables = json.loads(args.variables) if args.variables else {}
    sys.exit(asyncio.run(main(args.definition, extra_variables, headless=not args.headed, output=args.output)))
