from django.db import models


class OrderTrackingEvent(models.Model):
    """Status history entry for an order"""
    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='tracking_events')
    status = models.CharField(max_length=20)
    description = models.TextField(blank=True, default='')
    location = models.CharField(max_length=100, blank=True, default='System')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_tracking_events'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.order_id} {self.status}"
