"""Shared configuration, logging, exceptions and instrumentation."""
