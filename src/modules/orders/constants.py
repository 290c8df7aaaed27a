"""Order domain constants.

Status choices for orders.  There is no transition table: an order may
move from any status to any other; the service only guards the stock
held by the order when it enters or leaves ``CANCELED``.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pendente"
    PAID = "PAID", "Pago"
    PROCESSING = "PROCESSING", "Em processamento"
    SHIPPED = "SHIPPED", "Enviado"
    DELIVERED = "DELIVERED", "Entregue"
    CANCELED = "CANCELED", "Cancelado"


INITIAL_STATUS = OrderStatus.PENDING
