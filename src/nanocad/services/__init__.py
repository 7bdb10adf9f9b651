"""Service layer — command dispatch over a session.

Every public service method returns a ServiceResult. Domain errors are
converted at this boundary; nothing below the CLI exits the process.
"""
