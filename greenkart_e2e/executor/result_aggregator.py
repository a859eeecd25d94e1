import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from greenkart_e2e.data import RunSummary, TestStatus

STATIC_DIR = os.path.join(os.path.dirname(__file__), "..", "static")


class ResultAggregator:
    """Summarises a run and writes the JSON and HTML reports."""

    def __init__(self, report_folder: str = "reports"):
        self.report_folder = report_folder

    def report_dir(self) -> str:
        timestamp = os.getenv("GREENKART_TIMESTAMP") or datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        return os.path.join(self.report_folder, f"run_{timestamp}")

    def collect_failures(self, summary: RunSummary) -> List[Dict[str, Any]]:
        """One entry per failed test, plus one per spec file that could not run."""
        failures = []
        for spec in summary.specs:
            if spec.error_message:
                failures.append({"spec": spec.spec, "title": None, "error": spec.error_message, "screenshots": []})
            for test in spec.tests:
                if test.status != TestStatus.FAILED:
                    continue
                failed_step = next((s for s in test.steps if s.status == TestStatus.FAILED), None)
                failures.append(
                    {
                        "spec": spec.spec,
                        "title": test.full_title,
                        "error": test.error_message,
                        "step": f"{failed_step.command} {failed_step.message}".strip() if failed_step else None,
                        "screenshots": test.screenshots,
                    }
                )
        return failures

    def aggregate_results(self, summary: RunSummary) -> Dict[str, Any]:
        data = summary.to_dict()
        data["failures"] = self.collect_failures(summary)
        return data

    async def generate_json_report(self, summary: RunSummary, report_dir: Optional[str] = None) -> str:
        """Write test_results.json and return its absolute path, or "" on error."""
        try:
            report_dir = report_dir or self.report_dir()
            os.makedirs(report_dir, exist_ok=True)

            json_path = os.path.join(report_dir, "test_results.json")
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(self.aggregate_results(summary), f, indent=2, ensure_ascii=False, default=str)

            absolute_path = os.path.abspath(json_path)
            logging.debug(f"JSON report generated: {absolute_path}")
            return absolute_path

        except Exception as e:
            logging.error(f"Failed to generate JSON report: {e}")
            return ""

    def generate_html_report(self, summary: RunSummary, report_dir: Optional[str] = None, template_name: str = "report.html.j2") -> str:
        """Render the HTML report and return its absolute path, or "" on error."""
        try:
            env = Environment(
                loader=FileSystemLoader(STATIC_DIR),
                autoescape=select_autoescape(["html", "j2"]),
            )
            template = env.get_template(template_name)
            html_out = template.render(
                run=self.aggregate_results(summary),
                generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            )

            report_dir = report_dir or self.report_dir()
            os.makedirs(report_dir, exist_ok=True)
            html_path = os.path.join(report_dir, "test_report.html")
            with open(html_path, "w", encoding="utf-8") as f:
                f.write(html_out)

            absolute_path = os.path.abspath(html_path)
            logging.debug(f"HTML report generated: {absolute_path}")
            return absolute_path
        except Exception as e:
            logging.error(f"Failed to generate HTML report: {e}")
            return ""
