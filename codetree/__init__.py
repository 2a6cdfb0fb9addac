"""Regex-based extraction of dependencies, interfaces and component types from Python, Rust, PHP and Swift source text."""

__version__ = "1.3.0"

__all__ = [
    "models",
    "python_processor",
    "rust_processor",
    "php_syntax",
    "php_processor",
    "swift_syntax",
    "swift_processor",
]