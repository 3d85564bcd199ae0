"""
ode_tutor

Hint backend for the linear-ODE tutoring widget.

Layout:
  - core/:     settings, logging, CORS
  - schemas/:  request/response models
  - services/: attempt gate, prompt builder, providers
  - api/:      FastAPI routers (hint, health, static files)
"""
