from pathlib import Path

BASE_DIR = Path(__file__).parent

def load_follow_up_template():
    return (BASE_DIR / "follow_up.txt").read_text().strip()

def load_search_results_template():
    return (BASE_DIR / "search_results.txt").read_text().strip()
