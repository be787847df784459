"""
Application Layer for the FitLife workout API.

Part of FL-3: Persistence layer

This package contains:
- ports/: Abstract interfaces (what the core needs)
- use_cases/: Flows that coordinate plan persistence and progression
- exceptions: Errors shared with the infrastructure layer
"""
