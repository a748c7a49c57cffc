"""
Web viewer for fluere drawings
"""
