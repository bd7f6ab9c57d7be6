"""
Configuration loader for exam parameters.

Handles loading and validating exam configuration files.
"""

import json
import sys
from pathlib import Path
from typing import Optional

from .models import ExamConfig


def default_config_path() -> Path:
    """config.json next to the executable, or at the project root."""
    if getattr(sys, 'frozen', False):
        exe_dir = Path(sys.executable).parent
    else:
        exe_dir = Path(__file__).parent.parent
    return exe_dir / "config.json"


def load_config(config_path: Optional[Path] = None) -> ExamConfig:
    """
    Load exam configuration from a JSON file.

    Args:
        config_path: Path to the configuration file. If None, looks for
                    'config.json' next to the executable/script.

    Returns:
        ExamConfig object with validated configuration

    Raises:
        ValueError: If config is invalid
    """
    if config_path is None:
        config_path = default_config_path()

    if not config_path.exists():
        print(f"Warning: Config file '{config_path}' not found. Using default configuration.")
        return ExamConfig.default()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")
    except OSError as e:
        raise ValueError(f"Error reading config file: {e}")

    if not isinstance(data, dict):
        raise ValueError("Invalid configuration: top-level JSON value must be an object")

    try:
        config = ExamConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration: {e}")

    is_valid, error_message = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error_message}")

    return config


def create_sample_config(output_path: Path):
    """
    Create a sample configuration file.

    Args:
        output_path: Path where to save the sample config
    """
    sample_config = {
        "question_count": 10,
        "exam_time_minutes": 10,
        "scale_over": 10.0,
        "poll_interval_ms": 250,
        "_comment": "Sample exam configuration. Out-of-range values are clamped when the exam starts.",
        "_instructions": {
            "question_count": "Questions drawn per attempt (1 to bank size)",
            "exam_time_minutes": "Time allowed per attempt in minutes (1 to 600)",
            "scale_over": "Grade scale, e.g. 10, 20 or 100 (1 to 1000)",
            "poll_interval_ms": "How often the countdown is refreshed"
        }
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(sample_config, f, indent=2)

    print(f"Sample configuration created at: {output_path}")
