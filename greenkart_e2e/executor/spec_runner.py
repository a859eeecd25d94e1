import logging
import os
import re
import shutil
from datetime import datetime
from typing import Optional

from greenkart_e2e.actions import ActionHandler
from greenkart_e2e.browser.config import build_browser_config
from greenkart_e2e.browser.session import BrowserSession
from greenkart_e2e.config import RunnerConfig
from greenkart_e2e.data import RunSummary, SpecResult, TestResult, TestStatus
from greenkart_e2e.executor.result_aggregator import ResultAggregator
from greenkart_e2e.executor.spec_loader import SpecFile, load_spec_files
from greenkart_e2e.utils.log_icon import icon
from greenkart_e2e.utils.video import compress_video_async

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|]')


def safe_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("", name).strip()


class SpecRunner:
    """Runs spec files one after another, each in its own browser session."""

    def __init__(self, config: RunnerConfig, session_factory=BrowserSession, result_aggregator: ResultAggregator = None):
        self.config = config
        self.session_factory = session_factory
        self.result_aggregator = result_aggregator or ResultAggregator(config.report.folder)

    def trash_assets(self):
        """Empty the screenshot and video folders."""
        for folder in (self.config.e2e.screenshots_folder, self.config.e2e.videos_folder):
            if os.path.isdir(folder):
                shutil.rmtree(folder)
                logging.debug(f"Trashed assets in {folder}")

    async def run(self, spec_filter: Optional[str] = None) -> RunSummary:
        """Run every spec file matching the configured pattern.

        Args:
            spec_filter: Optional second glob, relative to the specs folder, that
                selected files must also match.

        Raises:
            FileNotFoundError: no spec file matched.
        """
        e2e = self.config.e2e
        summary = RunSummary(base_url=self.config.base_url)

        spec_files = load_spec_files(e2e.resolved_specs_folder(), e2e.spec_pattern, spec_filter)
        logging.info(f"{icon['spec']} Found {len(spec_files)} spec file(s): {[s.name for s in spec_files]}")

        if e2e.trash_assets_before_runs:
            self.trash_assets()

        summary.start()
        for spec_file in spec_files:
            summary.specs.append(await self.run_spec_file(spec_file))
        summary.complete()

        stats = summary.get_summary_stats()
        logging.info(
            f"{icon['report']} Run finished: {stats['passed']} passed, {stats['failed']} failed, "
            f"{stats['skipped']} skipped in {stats['total_specs']} spec file(s)"
        )

        report_dir = self.result_aggregator.report_dir()
        summary.report_path = await self.result_aggregator.generate_json_report(summary, report_dir=report_dir)
        summary.html_report_path = self.result_aggregator.generate_html_report(summary, report_dir=report_dir)
        return summary

    async def run_spec_file(self, spec_file: SpecFile) -> SpecResult:
        e2e = self.config.e2e
        result = SpecResult(spec=spec_file.name, start_time=datetime.now())
        logging.info(f"{icon['running']} Running: {spec_file.name}")

        video_dir = os.path.join(e2e.videos_folder, ".recording") if e2e.video else None
        session = self.session_factory(browser_config=build_browser_config(self.config, video_dir=video_dir))

        try:
            await session.initialize()
            handler = await ActionHandler().initialize(session.get_page(), timeout=e2e.default_command_timeout)

            ran_any = False
            for spec_cls in spec_file.specs:
                spec = spec_cls(handler, self.config.base_url)
                for method_name, title, skip in spec_cls.tests():
                    test_result = TestResult(spec=spec_file.name, suite=spec_cls.describe or spec_cls.__name__, title=title)
                    if skip:
                        test_result.status = TestStatus.SKIPPED
                        result.tests.append(test_result)
                        continue
                    if ran_any:
                        await session.reset_page()
                    ran_any = True
                    await self._run_test(spec, method_name, test_result, session, spec_file)
                    result.tests.append(test_result)

        except Exception as e:
            result.error_message = f"Spec execution failed: {e}"
            logging.error(f"{icon['cross']} {spec_file.name}: {result.error_message}")

        finally:
            video_target = None
            if e2e.video:
                video_target = os.path.join(e2e.videos_folder, f"{spec_file.path.name}.webm")
            saved_video = await session.close(video_path=video_target)
            if saved_video:
                result.video = await self._finalize_video(saved_video)
            if video_dir and os.path.isdir(video_dir):
                shutil.rmtree(video_dir, ignore_errors=True)
            result.end_time = datetime.now()

        logging.info(f"{icon['check'] if result.status != TestStatus.FAILED else icon['cross']} {spec_file.name}: {result.status.value}")
        return result

    async def _run_test(self, spec, method_name: str, test_result: TestResult, session, spec_file: SpecFile):
        handler = spec.actions
        test_result.start()
        try:
            await getattr(spec, method_name)()
            test_result.complete(success=True)
            logging.info(f"  {icon['check']} {test_result.full_title}")
        except Exception as e:
            test_result.complete(success=False, error_message=f"{type(e).__name__}: {e}")
            logging.error(f"  {icon['cross']} {test_result.full_title}: {test_result.error_message}")
            if self.config.e2e.screenshot_on_run_failure:
                screenshot = await self._capture_failure(session, spec_file, test_result)
                if screenshot:
                    test_result.screenshots.append(screenshot)
        finally:
            test_result.steps = handler.reset()

    async def _capture_failure(self, session, spec_file: SpecFile, test_result: TestResult) -> Optional[str]:
        path = os.path.join(
            self.config.e2e.screenshots_folder,
            spec_file.path.name,
            f"{safe_filename(test_result.full_title)} (failed).png",
        )
        try:
            await session.screenshot(path)
            logging.info(f"  {icon['camera']} Screenshot: {path}")
            return path
        except Exception as e:
            logging.warning(f"Failed to capture failure screenshot for {test_result.full_title}: {e}")
            return None

    async def _finalize_video(self, video_path: str) -> str:
        crf = self.config.e2e.video_compression
        if crf:
            video_path = await compress_video_async(video_path, crf)
        logging.info(f"  {icon['video']} Video: {video_path}")
        return video_path
