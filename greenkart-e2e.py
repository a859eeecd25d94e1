#!/usr/bin/env python3
import argparse
import asyncio
import os
import sys
import traceback

import requests
import yaml
from dotenv import load_dotenv
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from pydantic import ValidationError

from greenkart_e2e.config import find_config_file, load_config
from greenkart_e2e.executor import SpecRunner
from greenkart_e2e.utils import GetLog


async def check_playwright_browsers_async():
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            await browser.close()
        print("✅ Playwright browsers available")
        return True
    except PlaywrightError as e:
        print(f"⚠️ Playwright browsers unavailable: {e}")
        return False
    except Exception as e:
        print(f"❌ Playwright check exception: {e}")
        return False


def check_target_reachable(url, timeout=10.0):
    """Check the target answers at all.

    Only a connection failure stops the run. An error status is printed as a
    warning and the specs still run.
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        print(f"❌ Target unreachable: {url} ({e})")
        return False
    if response.status_code >= 400:
        print(f"⚠️ Target returned status {response.status_code}: {url}")
        return True
    print(f"✅ Target reachable: {url} (status {response.status_code})")
    return True


async def run_specs(cfg, spec_filter=None):
    is_docker = os.getenv("DOCKER_ENV") == "true"
    print(f"🏃 Runtime environment: {'Docker container' if is_docker else 'Local environment'}")
    print(f"🎯 Target: {cfg.base_url}")
    print(f"📄 Spec pattern: {cfg.e2e.spec_pattern}" + (f" (filter: {spec_filter})" if spec_filter else ""))

    print("🔍 Checking Playwright browsers...")
    if not await check_playwright_browsers_async():
        print("Please manually run: `playwright install chromium` to install browser binaries, then retry.", file=sys.stderr)
        return 1

    print("🔍 Checking target...")
    loop = asyncio.get_running_loop()
    if not await loop.run_in_executor(None, check_target_reachable, cfg.base_url):
        return 1

    try:
        summary = await SpecRunner(cfg).run(spec_filter=spec_filter)
    except FileNotFoundError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except Exception:
        print("Spec execution failed, stack trace:", file=sys.stderr)
        traceback.print_exc()
        return 1

    stats = summary.get_summary_stats()
    print(f"🔢 Tests: {stats['total']}")
    print(f"✅ Passed: {stats['passed']}")
    print(f"❌ Failed: {stats['failed']}")
    if stats["skipped"]:
        print(f"⏭️ Skipped: {stats['skipped']}")

    if summary.html_report_path:
        print("HTML report path: ", summary.html_report_path)
    else:
        print("HTML report generation failed")

    return 0 if summary.success else 1


def parse_args():
    parser = argparse.ArgumentParser(description="GreenKart end-to-end spec runner")
    parser.add_argument("--config", "-c", help="YAML configuration file path (optional, default auto-search config/config.yaml)")
    parser.add_argument("--spec", "-s", help="Only run spec files matching this glob, relative to the specs folder or an absolute path inside it")
    return parser.parse_args()


def main():
    load_dotenv()
    args = parse_args()

    try:
        config_path = find_config_file(args.config, script_dir=os.path.dirname(os.path.abspath(__file__)))
        print(f"✅ Using config file: {config_path}")
        cfg = load_config(config_path)
    except (FileNotFoundError, ValueError, ValidationError, yaml.YAMLError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)

    GetLog.get_log(level=cfg.log.level, log_dir=cfg.log.folder)
    sys.exit(asyncio.run(run_specs(cfg, spec_filter=args.spec)))


if __name__ == "__main__":
    main()
