"""
Image feature: content-addressed storage and the image route.
"""
