from . import crud_user as user
from . import crud_customer as customer
from . import crud_invoice as invoice
from . import crud_revenue as revenue
from . import crud_dashboard as dashboard
