# utils.py
"""
Utility functions used by the batch driver and the scheduling run.
"""

import json
import os
import sys
from datetime import datetime


def flush_print(*args, **kwargs):
    """Print and flush immediately so progress shows up in piped batch logs."""
    print(*args, **kwargs)
    sys.stdout.flush()


def create_output_folder(base_dir, num_students=0, num_content=0, num_slots=0, num_teachers=0, strategy="greedy"):
    """
    Creates a unique output folder for this scheduling run.

    Folder naming: {base_dir}/{YYYYMMDD}_{HHMMSS}_{strategy}_ST{students}_C{content}_SL{slots}_T{teachers}/

    Returns:
        str: Absolute path to the created output folder
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    dataset_info = f"ST{num_students}_C{num_content}_SL{num_slots}_T{num_teachers}"
    folder_name = f"{timestamp}_{strategy}_{dataset_info}"

    outputs_dir = os.path.abspath(base_dir)
    os.makedirs(outputs_dir, exist_ok=True)

    run_folder = os.path.join(outputs_dir, folder_name)
    os.makedirs(run_folder, exist_ok=True)

    return run_folder


def load_config(path='config.json'):
    """Load configuration from JSON file."""
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        print(f"FATAL: Could not load or parse {path}. Error: {e}")
        sys.exit(1)
