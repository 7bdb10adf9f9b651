"""Domain layer — units, tokenizer, variables, layers, objects, dimensions.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
