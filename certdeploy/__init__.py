"""certdeploy - Deploy TLS certificates to appliances via their XML API"""

__version__ = "1.0.0"
