"""HTTP API (Django REST framework) over the aggregator services."""
