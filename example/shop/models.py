from django.db import models


class Product(models.Model):
    """
    Inventory row. stock_quantity is decremented by the sales trigger,
    never by application code.
    """

    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock_quantity = models.IntegerField()

    class Meta:
        db_table = "products"

    def __str__(self) -> str:
        return f"{self.name} ({self.stock_quantity})"


class Sale(models.Model):
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="sales")
    quantity = models.IntegerField()
    salesperson_id = models.IntegerField()
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    sale_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "sales"

    def __str__(self) -> str:
        return f"sale #{self.pk}: {self.quantity} x {self.product_id}"


class Commission(models.Model):
    """
    Derived row, created by the sales trigger (5% of the sale total).
    """

    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name="commissions")
    salesperson_id = models.IntegerField()
    commission_amount = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = "commissions"
