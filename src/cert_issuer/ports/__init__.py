"""Ports - interfaces between the issuance domain and the outside world."""
