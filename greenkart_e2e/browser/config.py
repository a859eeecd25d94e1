DEFAULT_CONFIG = {
    "headless": True,
    "viewport": {"width": 1280, "height": 720},
    "language": "en-US",
    "default_command_timeout": 4000,
    "video_dir": None,
}


def build_browser_config(config, video_dir=None):
    """Flatten a RunnerConfig into the dict the Driver consumes."""
    browser = config.browser_config
    return {
        "headless": browser.headless,
        "viewport": {"width": browser.viewport.width, "height": browser.viewport.height},
        "language": browser.language,
        "default_command_timeout": config.e2e.default_command_timeout,
        "video_dir": video_dir,
    }
