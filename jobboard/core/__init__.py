"""Core package for functionality shared across all layers.

- **config**: Centralized configuration management with environment support
- **context**: Request context and correlation ID management
- **exceptions**: Error taxonomy for configuration, connection and operation failures
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Loguru setup with console and JSON formatters
- **types**: Type aliases for payloads and log context
"""
