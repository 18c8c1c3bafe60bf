"""HTML fixtures shaped like the catalog's listing pages."""


def product_html(
    title="iPhone 11",
    capacity="64GB",
    price="£510.00",
    colours=("Black", "White"),
    availability="Availability: In Stock",
    shipping="Delivery by 2024-03-25",
    image="../images/iphone-11-64gb.png",
):
    swatches = "".join(
        f'<span class="border border-black rounded-full block" data-colour="{colour}"></span>'
        for colour in colours
    )
    shipping_block = (
        f'<div class="my-4 text-sm block text-center">{shipping}</div>' if shipping is not None else ""
    )
    image_tag = f'<img src="{image}" alt="{title}">' if image is not None else "<span></span>"
    return f"""
    <div class="product px-4 py-4 w-full sm:w-1/2 md:w-1/3 lg:w-1/4">
      <div class="bg-white p-4 rounded-md">
        {image_tag}
        <h3 class="my-4 text-center">
          <span class="product-name">{title}</span>
          <span class="product-capacity">{capacity}</span>
        </h3>
        <div class="flex -mx-2">{swatches}</div>
        <div class="my-8 block text-center text-lg">{price}</div>
        <div class="my-4 text-sm block text-center">{availability}</div>
        {shipping_block}
      </div>
    </div>
    """


def page_html(products, pages=(1, 2, 3)):
    links = "".join(f'<a href="?page={page}">{page}</a>' for page in pages)
    return f"""
    <html><body>
      <div id="products"><div class="flex flex-wrap -mx-4">{"".join(products)}</div></div>
      <div id="pages" class="flex justify-center">{links}</div>
    </body></html>
    """
