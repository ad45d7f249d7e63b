"""
Item feature: schemas, persistence, catalogue service and routes.
"""
