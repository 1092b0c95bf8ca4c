"""Server-rendered applet page.

The page is plain HTML produced from a Jinja2 template; there is no client
side code beyond the applet tag itself.
"""
