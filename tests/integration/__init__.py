"""
Integration tests for the receipt payment pipeline.

These tests run S3 notifications through the Lambda handler with mocked
AWS clients and a recording transaction endpoint.
"""
