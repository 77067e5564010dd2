"""Configuration file for link-keepalive.

Copy to keepalive_config.py (or pass with --config) and adjust.
"""

# Keep-alive run settings
KEEPALIVE_CONFIG = {
    'urls': """
https://gofile.io/d/abc123
https://gofile.io/d/def456
""",
    'max_retries': 3,
    'page_timeout': 60000,
    'wait_time': 5000,
    'render_wait': 5000,
    'headless': True,
    'verbose': False,
    'download_bytes': 1048576,
    'download_timeout': 60.0,
    'verify_ssl': True,
    'chromium_executable': None,
    'user_agent': None,
    'block_resources': True,
    'min_target_delay': 2.0,
    'max_target_delay': 7.0,
    'heuristics_path': None,
    'log_file': None,
}

# Probe selectors and link patterns
HEURISTICS = {
    'version': '2024.1',
    'button_text_pattern': 'download|baixar|télécharger|descargar|scarica|get|obter',
    'download_path_pattern': '/download/',
    'cdn_host_pattern': r'srv-store\d+\.gofile\.io',
    'link_substrings': ['srv-store', '/download/', 'gofile.io/download'],
}
