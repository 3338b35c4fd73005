"""certdeploy CLI commands"""
