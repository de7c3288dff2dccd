"""Jobboard - data-access gateway for a job-marketplace application.

Jobboard backs profiles, job postings, applications, a social feed and
subscription payments behind a uniform action contract built with Python 3.13+,
SQLAlchemy and FastAPI.

Architecture Overview:
- **Actions Layer**: Entity gateways returning normalized result envelopes
- **Core Layer**: Configuration, logging, exceptions and request context
- **Infrastructure Layer**: Shared database connection and payment provider
- **API Layer**: FastAPI surface that invokes actions by name

Every action acquires the process-wide database connection through a single
connection manager, performs exactly one data operation, and reports the
outcome as ``{success, data | message}``. Successful mutations notify cache
invalidation listeners with the caller-supplied path.
"""
