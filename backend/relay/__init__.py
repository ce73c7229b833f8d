"""
File relay service: upload files to S3 and share them by URL.
"""
__version__ = "0.1.0"
