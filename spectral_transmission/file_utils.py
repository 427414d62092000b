import re

#sanitize names
def sanitize_filename_component(name: str, lowercase=False, max_len=None) -> str:
    clean = re.sub(r'[<>:"/\\|?*\s]+', "-", name).strip("-")
    if lowercase:
        clean = clean.lower()
    if max_len:
        clean = clean[:max_len]
    return clean
