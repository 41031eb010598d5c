"""
storefront: noyau serveur de la boutique d'impressions murales.
Tarification, vérification des paniers, cycle de paiement PayPal et accès admin.
"""

__version__ = "0.1.0"
