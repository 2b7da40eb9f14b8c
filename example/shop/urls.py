from django.urls import path

from . import views

urlpatterns = [
    path("sales/", views.create_sale, name="create_sale"),
    path("products/<int:product_id>/", views.product_detail, name="product_detail"),
]
